"""HTTP handler layer over the order builder, account projector and ledger."""

from desk.api.app import create_app

__all__ = ["create_app"]
