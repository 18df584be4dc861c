from specklepy.logging.exceptions import SpeckleException


class SpeckleTabularException(SpeckleException):
    pass


class ObjectNotFoundException(SpeckleTabularException):
    """The transport holds no object for the requested id"""


class ObjectFetchException(SpeckleTabularException):
    """The object could not be read or decoded from the transport"""


class InvalidInputException(SpeckleTabularException):
    """An operation got a list where it expects an object, or the reverse"""
