class ShootingReportError(Exception):
    """Base exception for the shooting incident report"""
    pass


class DatasetFetchError(ShootingReportError):
    """The incident resource could not be downloaded"""
    pass


class DatasetFormatError(ShootingReportError):
    """The incident resource is unreadable or lacks expected columns"""
    pass


class DataProcessingError(ShootingReportError):
    """A field could not be coerced to its typed form"""
    pass


class InsufficientDataError(ShootingReportError):
    """Too few distinct years to fit the yearly trend"""
    pass
