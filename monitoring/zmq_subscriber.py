"""ZeroMQ SUB socket for remotely monitoring settlement events."""
import json

import zmq


class ZMQSubscriber:
    """Subscribe to engine events via ZeroMQ."""

    def __init__(self, host="localhost", port=5555, topics=None):
        self._context = zmq.Context()
        self._socket = self._context.socket(zmq.SUB)
        self._socket.connect(f"tcp://{host}:{port}")

        for topic in topics or [""]:
            self._socket.setsockopt_string(zmq.SUBSCRIBE, topic)

        self._available = True

    @property
    def available(self):
        return self._available

    def receive(self, timeout_ms=1000):
        """Receive a message with timeout.

        Returns (topic, data_dict) or None on timeout or after close().
        """
        if not self._available:
            return None

        poller = zmq.Poller()
        poller.register(self._socket, zmq.POLLIN)
        socks = dict(poller.poll(timeout_ms))

        if self._socket in socks:
            raw = self._socket.recv_string()
            topic, _, payload = raw.partition(" ")
            return topic, json.loads(payload)

        return None

    def close(self):
        """Clean up ZMQ resources."""
        if self._available:
            self._socket.close()
            self._context.term()
            self._available = False
