import logging

# note, you can use following code in your project
# to see every split, steal and merge for example
#
# import bplus
# bplus.log.logger.setLevel(logging.DEBUG)
#

# basic setting
logging.basicConfig(
    level=logging.WARNING,
    format='%(levelname)s|%(asctime)s|%(message)s',
)

# global logger used by `bplus`
logger = logging.getLogger("bplus_logger")
