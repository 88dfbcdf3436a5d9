from reviewdesk.pages.views import router

__all__ = ["router"]
