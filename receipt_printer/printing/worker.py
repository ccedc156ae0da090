"""
Background worker and job state for Receipt Printer.

This module owns:
- A thread-backed job queue of PrinterContext instances
- In-memory job registry with basic lifecycle (queued -> running -> success/error/cancelled)
- Cooperative cancellation of queued or running jobs
- Public helpers to enqueue contexts and query their status

Executing a context here keeps the caller's thread free; jobs run one at a
time because a printer is a single linear output stream.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from receipt_printer.core.logging import current_job_id
from receipt_printer.printing.context import PrinterContext

logger = logging.getLogger(__name__)

JOB_QUEUE: queue.Queue[Dict[str, Any]] = queue.Queue()
JOBS: Dict[str, Dict[str, Any]] = {}
JOBS_LOCK = threading.RLock()
JOBS_MAX = int(os.environ.get("RECEIPTPRINTER_JOBS_MAX", "200"))

# Cancellation events for jobs that have not finished yet
_CANCEL_EVENTS: Dict[str, threading.Event] = {}

WORKER_THREAD: Optional[threading.Thread] = None
WORKER_STARTED = False

_FINISHED = ("success", "error", "cancelled")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _prune_jobs_if_needed() -> None:
    with JOBS_LOCK:
        while len(JOBS) > JOBS_MAX:
            finished = [j for j in JOBS.values() if j.get("status") in _FINISHED]
            if not finished:
                return
            oldest_id = min(finished, key=lambda j: j.get("created_at", ""))["id"]
            JOBS.pop(oldest_id, None)


def _create_job(meta: Optional[Dict[str, Any]] = None) -> str:
    job_id = uuid.uuid4().hex
    now = _utc_now_iso()
    job = {
        "id": job_id,
        "type": "receipt",
        "status": "queued",
        "created_at": now,
        "updated_at": now,
    }
    if meta:
        job.update(meta)
    with JOBS_LOCK:
        JOBS[job_id] = job
        _CANCEL_EVENTS[job_id] = threading.Event()
        _prune_jobs_if_needed()
    return job_id


def _update_job(job_id: Optional[str], **updates: Any) -> None:
    if not job_id:
        return
    with JOBS_LOCK:
        job = JOBS.get(job_id)
        if not job:
            return
        job.update(updates)
        job["updated_at"] = _utc_now_iso()


def _run_job(job: Dict[str, Any]) -> None:
    job_id = job["job_id"]
    context: PrinterContext = job["context"]
    with JOBS_LOCK:
        cancel = _CANCEL_EVENTS.get(job_id) or threading.Event()

    if cancel.is_set():
        logger.info("Job %s cancelled before start", job_id)
        _update_job(job_id, status="cancelled", dispatched=0)
        return

    _update_job(job_id, status="running")
    summary = context.execute(cancel)
    _update_job(
        job_id,
        status="cancelled" if summary.cancelled else "success",
        dispatched=summary.dispatched,
    )


def _print_worker() -> None:
    """
    Worker loop that processes queued jobs. Never raises; logs and updates job status.
    """
    while True:
        job = JOB_QUEUE.get()
        job_id = job.get("job_id")
        token = current_job_id.set(job_id)
        try:
            _run_job(job)
        except Exception as e:
            logger.exception(f"Job failed: {e}")
            _update_job(job_id, status="error", error=str(e))
        finally:
            current_job_id.reset(token)
            with JOBS_LOCK:
                _CANCEL_EVENTS.pop(job_id, None)
            JOB_QUEUE.task_done()


def ensure_worker() -> None:
    """
    Ensure the background worker thread is started (idempotent).
    """
    global WORKER_THREAD, WORKER_STARTED
    if WORKER_STARTED and WORKER_THREAD and WORKER_THREAD.is_alive():
        return
    t = threading.Thread(target=_print_worker, daemon=True, name="receipt-printer-worker")
    t.start()
    WORKER_THREAD = t
    WORKER_STARTED = True
    logger.info("Background print worker started")


def enqueue_context(context: PrinterContext, origin: Optional[str] = None) -> str:
    """
    Enqueue a built PrinterContext for background execution. Returns the job id.
    """
    meta: Dict[str, Any] = {"total": len(context.actions)}
    if origin:
        meta["origin"] = origin
    job_id = _create_job(meta)
    JOB_QUEUE.put({"job_id": job_id, "context": context})
    logger.info("enqueue_context: job id=%s queue_size=%d", job_id, JOB_QUEUE.qsize())
    return job_id


def cancel_job(job_id: str) -> bool:
    """
    Request cancellation of a queued or running job.
    Returns False when the job is unknown or already finished.
    """
    with JOBS_LOCK:
        event = _CANCEL_EVENTS.get(job_id)
        job = JOBS.get(job_id)
        if event is None or job is None or job.get("status") in _FINISHED:
            return False
        event.set()
    logger.info("Cancellation requested for job %s", job_id)
    return True


def get_job(job_id: str) -> Optional[Dict[str, Any]]:
    """
    Retrieve a job by id.
    """
    with JOBS_LOCK:
        job = JOBS.get(job_id)
        return dict(job) if job else None


def list_jobs() -> List[Dict[str, Any]]:
    """
    Return a list of jobs sorted by created_at descending.
    """
    with JOBS_LOCK:
        items = [dict(v) for v in JOBS.values()]
    items.sort(key=lambda j: j.get("created_at", ""), reverse=True)
    return items


def worker_status() -> Dict[str, Any]:
    """
    Return basic worker/queue status.
    """
    alive = bool(WORKER_THREAD) and WORKER_THREAD.is_alive()  # type: ignore[union-attr]
    return {
        "worker_started": WORKER_STARTED,
        "worker_alive": alive,
        "queue_size": JOB_QUEUE.qsize(),
    }


__all__ = [
    "JOBS",
    "JOBS_MAX",
    "JOB_QUEUE",
    "cancel_job",
    "enqueue_context",
    "ensure_worker",
    "get_job",
    "list_jobs",
    "worker_status",
]
