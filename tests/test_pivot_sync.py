import pytest

from tourdesk.core.result import ErrorKind, Ok
from tourdesk.core.unit_of_work import UnitOfWork
from tourdesk.models import activity_add_ons
from tourdesk.repository import pivot_repository
from tourdesk.services.pivot_sync import PivotSynchronizer


@pytest.fixture
def sync(db, activity):
    def _sync(relation, item_ids):
        synchronizer = PivotSynchronizer(db)
        return UnitOfWork(db, resource="La relación").run(
            lambda: synchronizer.sync(
                actividad_id=activity.id,
                relation=relation,
                item_ids=item_ids,
                agencia_id=activity.agencia_id,
            )
        )

    return _sync


def linked_add_ons(db, activity_id):
    return pivot_repository.linked_ids(db, activity_add_ons, "adicionales_id", activity_id)


def test_links_are_replaced_and_duplicates_collapse(db, activity, catalogue, sync):
    lunch, poles = catalogue["adicional"], catalogue["adicional_2"]
    sync("adicionales", [lunch.id])

    result = sync("adicionales", [poles.id, poles.id, lunch.id])

    assert isinstance(result, Ok)
    assert result.value == [poles.id, lunch.id]
    assert linked_add_ons(db, activity.id) == sorted([lunch.id, poles.id])


def test_empty_list_removes_every_link(db, activity, catalogue, sync):
    sync("adicionales", [catalogue["adicional"].id])

    sync("adicionales", [])

    assert linked_add_ons(db, activity.id) == []


def test_relations_are_independent(db, activity, catalogue, sync):
    sync("adicionales", [catalogue["adicional"].id])
    sync("transportes", [catalogue["transporte"].id])
    sync("descuentos", [catalogue["descuento"].id])

    sync("transportes", [])

    assert linked_add_ons(db, activity.id) == [catalogue["adicional"].id]
    assert [item.id for item in pivot_repository.list_linked(db, "descuentos", activity.id)] == [
        catalogue["descuento"].id
    ]
    assert pivot_repository.list_linked(db, "transportes", activity.id) == []


def test_items_of_another_agency_are_rejected(db, activity, catalogue, sync):
    sync("adicionales", [catalogue["adicional"].id])

    result = sync("adicionales", [catalogue["adicional"].id, catalogue["adicional_ajeno"].id])

    assert result.error.kind is ErrorKind.NOT_FOUND
    assert linked_add_ons(db, activity.id) == [catalogue["adicional"].id]


def test_unknown_relation_is_a_validation_error(sync):
    result = sync("guias", [1])

    assert result.error.kind is ErrorKind.VALIDATION
