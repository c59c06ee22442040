# app/core/exceptions.py
"""Domain errors raised by the availability engine and its collaborators"""


class AvailabilityError(Exception):
    """Base class for errors the API layer knows how to report"""
    status_code = 500


class InvalidInputError(AvailabilityError):
    """Malformed date, out-of-range duration or granularity, missing parameter"""
    status_code = 400


class SalonNotFoundError(AvailabilityError):
    """Unknown or inactive tenant slug"""
    status_code = 404

    def __init__(self, slug: str):
        super().__init__("Salon not found")
        self.slug = slug


class UpstreamUnavailableError(AvailabilityError):
    """Salon or appointment fetch did not finish in time"""
    status_code = 503
