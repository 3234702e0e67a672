"""
Domain errors raised by the service layer.

Routers never build HTTP errors for expected failures themselves; the handler
registered in ``create_app`` maps each class to its status code.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse


class SalonRecruitError(Exception):
    """Base error with a human readable message"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class InvalidInputError(SalonRecruitError):
    """Malformed or missing input the client can fix"""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidSlotError(InvalidInputError):
    """Tour start time falls outside the booking window"""


class NotFoundError(SalonRecruitError):
    """Referenced entity does not exist"""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class ConflictError(SalonRecruitError):
    """Operation would break an invariant"""
    status_code = status.HTTP_409_CONFLICT


class UnavailableError(SalonRecruitError):
    """A required dependency (active campaign, SMS provider) is not usable"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


async def salon_recruit_error_handler(_request: Request, exc: SalonRecruitError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
