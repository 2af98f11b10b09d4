"""Tour and activity booking administration service."""
