"""ZeroMQ PUB socket for broadcasting settlement events to remote monitors."""
import json

import zmq


class ZMQPublisher:
    """Publish engine events via ZeroMQ."""

    def __init__(self, port=5555):
        self._context = zmq.Context()
        self._socket = self._context.socket(zmq.PUB)
        self._socket.bind(f"tcp://*:{port}")
        self._available = True

    @property
    def available(self):
        return self._available

    def publish(self, topic, data):
        """Publish a JSON message on a topic.

        Topics: 'bet', 'settlement', 'pool', 'heartbeat'
        """
        if not self._available:
            return
        message = json.dumps(data)
        self._socket.send_string(f"{topic} {message}")

    def close(self):
        """Clean up ZMQ resources."""
        if self._available:
            self._socket.close()
            self._context.term()
            self._available = False
