"""Monitor a running settlement desk via ZeroMQ.

Usage:
    python scripts/run_monitor.py
    python scripts/run_monitor.py --host 192.168.1.100 --port 5555
    python scripts/run_monitor.py --topics settlement,pool
"""
import argparse
import json
import sys
import os
import time

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from monitoring.zmq_subscriber import ZMQSubscriber


def main():
    parser = argparse.ArgumentParser(description="Monitor settlement desk events")
    parser.add_argument("--host", default="localhost", help="Desk host address")
    parser.add_argument("--port", type=int, default=5555, help="ZMQ port")
    parser.add_argument("--topics", default="", help="Comma-separated topics to filter")
    parser.add_argument("--silence", type=float, default=60.0,
                        help="Warn after this many seconds without an event")
    args = parser.parse_args()

    topics = [t.strip() for t in args.topics.split(",") if t.strip()] or None

    print(f"Connecting to desk at {args.host}:{args.port}...")
    if topics:
        print(f"Filtering topics: {topics}")

    subscriber = ZMQSubscriber(host=args.host, port=args.port, topics=topics)

    print("Listening for events (Ctrl+C to quit)...\n")
    last_event = time.time()

    try:
        while True:
            msg = subscriber.receive(timeout_ms=2000)
            if msg:
                topic, data = msg
                last_event = time.time()
                print(f"[{topic.upper():>10}] {json.dumps(data, indent=2)}")
            else:
                silence = time.time() - last_event
                if silence > args.silence:
                    print(f"WARNING: No events for {silence:.0f}s")
    except KeyboardInterrupt:
        print("\nMonitor stopped.")
    finally:
        subscriber.close()


if __name__ == "__main__":
    main()
