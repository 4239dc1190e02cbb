# app/workers/worker_main.py

from rq import Queue, SimpleWorker

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.workers.queue import get_redis_connection


QUEUE_NAMES = [settings.NOTIFICATION_QUEUE_NAME]


def main():
    setup_logging(settings.LOG_LEVEL)
    redis_conn = get_redis_connection()

    queues = [Queue(name, connection=redis_conn) for name in QUEUE_NAMES]

    worker = SimpleWorker(queues, connection=redis_conn)

    worker.work()


if __name__ == "__main__":
    main()
