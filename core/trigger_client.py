"""Fire-and-forget recalculation trigger for the job management service."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception_type,
    before_sleep_log
)

from core.config_loader import TriggerConfig

logger = logging.getLogger(__name__)

OUTCOME_COMPLETED = 'completed'
OUTCOME_UNREACHABLE = 'unreachable'
OUTCOME_TIMED_OUT = 'timed_out'
OUTCOME_FAILED = 'failed'


@dataclass
class TriggerOutcome:
    job_id: str
    outcome: str
    status_code: Optional[int] = None
    error_code: Optional[str] = None
    summary: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.outcome == OUTCOME_COMPLETED


class MatchingTriggerClient:
    """
    Client that asks the matching service to recalculate a job.

    Called after a job is created, activated or updated. It never raises:
    the triggering action must succeed even when recalculation does not.
    Each failure class is logged with its own warning because it calls for
    a different operator response:
    - unreachable: retry later
    - timed out: run a manual recalculation
    - failed: report a bug (or fix the job's requirements)
    """

    def __init__(self, config: Optional[TriggerConfig] = None):
        self.config = config or TriggerConfig()
        self.base_url = self.config.url.rstrip('/')
        self.session = requests.Session()

        logger.info(
            f"MatchingTriggerClient initialized: base_url={self.base_url}, "
            f"timeout={self.config.timeout_seconds}s"
        )

    def _post_calculate(self, job_id: str, auth_token: str) -> requests.Response:
        # Only connection failures (ConnectTimeout included) are retried. A read
        # timeout means the run may still be going server-side and a retry
        # would hit the job lock.
        poster = retry(
            stop=stop_after_attempt(self.config.retry_attempts),
            wait=wait_fixed(1),
            retry=retry_if_exception_type(requests.ConnectionError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )(self._post_once)
        return poster(job_id, auth_token)

    def _post_once(self, job_id: str, auth_token: str) -> requests.Response:
        return self.session.post(
            f"{self.base_url}/api/v1/matching/jobs/{job_id}/calculate",
            json={},
            headers={'Authorization': f'Bearer {auth_token}'},
            timeout=self.config.timeout_seconds
        )

    def trigger(self, job_id: str, auth_token: str) -> TriggerOutcome:
        """Trigger a recalculation and wait for it, bounded by the configured timeout."""
        logger.info(f"Triggering matching calculation for job {job_id}")

        try:
            response = self._post_calculate(job_id, auth_token)
        except requests.ConnectionError:
            # Also catches ConnectTimeout, which never reached the service
            logger.warning(
                f"Matching service is not available for job {job_id}: "
                "matches will need to be calculated manually"
            )
            return TriggerOutcome(job_id=job_id, outcome=OUTCOME_UNREACHABLE)
        except requests.Timeout:
            logger.warning(
                f"Matching calculation timed out for job {job_id}: "
                "this may indicate a large candidate pool, trigger it manually"
            )
            return TriggerOutcome(job_id=job_id, outcome=OUTCOME_TIMED_OUT)
        except requests.RequestException as e:
            logger.warning(f"Matching calculation request failed for job {job_id}: {e}")
            return TriggerOutcome(job_id=job_id, outcome=OUTCOME_FAILED)

        body = self._parse_body(response)
        if response.ok:
            summary = body.get('data') or {}
            logger.info(
                f"Matching calculation completed for job {job_id}: "
                f"{summary.get('matchesWritten')} matches in {summary.get('durationMs')}ms"
            )
            return TriggerOutcome(
                job_id=job_id,
                outcome=OUTCOME_COMPLETED,
                status_code=response.status_code,
                summary=summary
            )

        error = body.get('error') or {}
        error_code = error.get('code')
        if response.status_code == 504:
            logger.warning(
                f"Matching calculation timed out server-side for job {job_id}: "
                "trigger it manually"
            )
            outcome = OUTCOME_TIMED_OUT
        else:
            logger.warning(
                f"Matching calculation failed for job {job_id}: "
                f"{response.status_code} {error_code} {error.get('message')}"
            )
            outcome = OUTCOME_FAILED

        return TriggerOutcome(
            job_id=job_id,
            outcome=outcome,
            status_code=response.status_code,
            error_code=error_code
        )

    def trigger_in_background(self, job_id: str, auth_token: str) -> threading.Thread:
        """Run trigger() on a daemon thread and return immediately."""
        thread = threading.Thread(
            target=self.trigger,
            args=(job_id, auth_token),
            name=f"match-trigger-{job_id}",
            daemon=True
        )
        thread.start()
        return thread

    @staticmethod
    def _parse_body(response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def close(self):
        """Close the session and release resources."""
        self.session.close()
        logger.info("MatchingTriggerClient session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
