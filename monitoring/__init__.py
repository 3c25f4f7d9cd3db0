from monitoring.logger import setup_logger, setup_from_settings, get_logger
from monitoring.zmq_publisher import ZMQPublisher
from monitoring.zmq_subscriber import ZMQSubscriber

__all__ = ["setup_logger", "setup_from_settings", "get_logger", "ZMQPublisher", "ZMQSubscriber"]
