import argparse
import logging
import signal
import threading

import uvicorn

from flowable_worker.client.acquisition import ExternalJobClient
from flowable_worker.client.transport import HttpTransport
from flowable_worker.config import WorkerSettings, set_enable_logging
from flowable_worker.worker.handlers import ExternalWorker
from flowable_worker.worker.subscription import Subscription

logging.basicConfig(level=logging.INFO, format='[%(process)d] %(threadName)s %(message)s')
logger = logging.getLogger("flowable_worker.main")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flowable-worker")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("subscribe", help="Poll a topic and run the sample handler on each job")
    run.add_argument("--url", dest="base_url")
    run.add_argument("--topic")
    run.add_argument("--worker-id", dest="worker_id")
    run.add_argument("--scope-type", dest="scope_type", choices=["bpmn", "cmmn"])
    run.add_argument("--interval", type=float)

    engine = sub.add_parser("engine", help="Serve the external-job-api emulator")
    engine.add_argument("--host", default="127.0.0.1")
    engine.add_argument("--port", type=int)
    return parser

def run_subscription(settings: WorkerSettings, args: argparse.Namespace):
    request = settings.subscription_request(
        base_url=getattr(args, "base_url", None),
        topic=getattr(args, "topic", None),
        worker_id=getattr(args, "worker_id", None),
        scope_type=getattr(args, "scope_type", None),
        interval=getattr(args, "interval", None),
    )

    # Transport config is fixed before the subscription thread starts
    with HttpTransport(settings.transport_config()) as transport:
        subscription = Subscription(request, ExternalJobClient(transport), ExternalWorker())
        done = threading.Event()

        def _shutdown(signum, _frame):
            logger.info({"event": "shutdown_requested", "signal": signum})
            subscription.stop()
            done.set()

        signal.signal(signal.SIGINT, _shutdown)
        signal.signal(signal.SIGTERM, _shutdown)

        subscription.start()
        done.wait()
        subscription.join()

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = WorkerSettings()
    set_enable_logging(settings.enable_logging)

    if args.command == "engine":
        uvicorn.run(
            "flowable_worker.engine.app:app",
            host=args.host,
            port=args.port or settings.engine_port,
        )
        return

    run_subscription(settings, args)

if __name__ == "__main__":
    main()
