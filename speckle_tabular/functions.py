import logging

logger = logging.getLogger("speckle_tabular")


def _report(msg: object) -> None:
    """
    Function for reporting progress messages to the user
    """
    logger.info("SpeckleTabular: {}".format(msg))
