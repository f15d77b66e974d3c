from ticketmatch.api.main import app

__all__ = ["app"]
