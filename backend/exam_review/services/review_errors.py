"""
Exam Review - Review Errors
Exceptions raised by the review scheduler, query engine and session tracker
"""


class ReviewError(Exception):
    """Base review subsystem error."""
    pass


class ReviewNotFoundError(ReviewError):
    """Review item or session does not exist."""
    pass


class ReviewValidationError(ReviewError):
    """Malformed input to a review operation."""
    pass


class ReviewPersistenceError(ReviewError):
    """The review store failed to read or write."""
    pass
