from .status_checker import check_response_status

__all__ = ["check_response_status"]
