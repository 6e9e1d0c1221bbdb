"""RQ worker entrypoint."""
import structlog
from redis import Redis
from rq import Worker

from record_sync_core.jobs import init_db
from record_sync_worker.settings import get_queue_name, get_redis_url
from record_sync_worker.tasks import run_sync_job  # noqa: F401

logger = structlog.get_logger()


def main():
    """Start the worker."""
    logger.info("initializing_database")
    init_db()

    conn = Redis.from_url(get_redis_url())
    worker = Worker([get_queue_name()], connection=conn)
    logger.info("worker_starting", queue=get_queue_name())
    worker.work()


if __name__ == "__main__":
    main()
