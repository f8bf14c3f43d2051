"""Background sweeper for expired links

Redis normally expires both keys of a link on its own. The sweeper is a
second line of defense for keys written with a wrong TTL and for durable
rows that outlive their cache keys: it walks every shortId:* key, recomputes
the expiration from the stored record and removes expired links.

Each key is processed independently. A failing key is logged and counted,
never aborting the sweep, and no lock is held against request traffic.

Classes:
    SweepReport:
        Counters emitted by one sweep.
    ExpirationSweeper:
        One-shot sweep() plus a cancellable repeating task (start()/stop()).

Functions:
    main() -> None:
        Run the sweeper as a long-lived worker until SIGTERM / Ctrl+C.

Example:
    >>> sweeper = ExpirationSweeper(store, interval_seconds=6 * 60 * 60)
    >>> sweeper.sweep()
    SweepReport(checked=120, deleted=3, failed=0)
    >>> sweeper.start()   # sweeps now, then every 6 hours
    >>> sweeper.stop()
"""

import logging
import signal
import threading
from dataclasses import dataclass
from datetime import datetime, UTC

from deepshortener.exceptions import DeepShortenerError
from deepshortener.dao.link_store import LinkStore
from deepshortener.utils.config import app_prefix, load_config
from deepshortener.utils.logging import initialize_logging
from deepshortener.utils.ttl import compute_expiration, is_expired


logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 6 * 60 * 60


@dataclass(frozen=True)
class SweepReport:
    checked: int = 0  # Records parsed and evaluated
    deleted: int = 0  # Expired links removed
    failed: int = 0   # Keys that raised while being processed


class ExpirationSweeper:
    """Periodically delete expired links from the cache and durable store."""

    def __init__(self, store: LinkStore, interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS):
        if interval_seconds <= 0:
            raise ValueError(f'Sweep interval must be positive (given value: {interval_seconds}).')

        self.store = store
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def sweep(self) -> SweepReport:
        """Run one sweep over every shortId:* key

        Returns:
            SweepReport: keys checked, links deleted and keys that failed.
            Enumeration failures are logged and yield an empty report.
        """
        logger.info('Starting cleanup of expired links.')
        try:
            keys = self.store.cache.short_id_keys()
        except DeepShortenerError:
            logger.exception('Failed to enumerate link keys. Skipping this sweep.')
            return SweepReport()

        logger.info('Found %s links to check.', len(keys))
        now = datetime.now(UTC)
        checked = deleted = failed = 0

        for key in keys:
            try:
                link = self.store.cache.get_by_key(key)
                if link is None:
                    # Expired or deleted since the scan
                    continue

                checked += 1
                if is_expired(link, self.store.policy, now):
                    logger.info(
                        'Deleting expired link.',
                        extra={
                            'shortId': link.short_id,
                            'bookingStartTime': link.booking_start_time,
                            'expiresAt': compute_expiration(link, self.store.policy),
                        },
                    )
                    self.store.purge(link)
                    deleted += 1
            except DeepShortenerError:
                failed += 1
                logger.exception('Error processing key.', extra={'key': key})

        report = SweepReport(checked=checked, deleted=deleted, failed=failed)
        logger.info(
            'Cleanup completed.',
            extra={'checked': report.checked, 'deleted': report.deleted, 'failed': report.failed},
        )
        return report

    def start(self) -> None:
        """Sweep once right away, then every interval_seconds on a daemon thread."""
        if self.running:
            raise RuntimeError('Expiration sweeper is already running.')

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name='expiration-sweeper', daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Cancel the repeating task and wait for an in-flight sweep to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.sweep()
            except Exception:
                # Keep the schedule alive; the next run starts from scratch
                logger.exception('Unexpected error in expiration sweeper.')
            self._stop_event.wait(self.interval_seconds)


def main() -> None:  # pragma: no cover
    initialize_logging()
    app_config = load_config('sweep_expired_links')
    interval = app_config.get('policy', {}).get('sweep_interval_seconds', DEFAULT_SWEEP_INTERVAL_SECONDS)

    with LinkStore.from_config(app_config, prefix=app_prefix()) as store:
        sweeper = ExpirationSweeper(store, interval_seconds=interval)
        shutdown = threading.Event()
        signal.signal(signal.SIGTERM, lambda *_: shutdown.set())

        sweeper.start()
        logger.info('Expiration sweeper started.', extra={'intervalSeconds': interval})
        try:
            shutdown.wait()
        except KeyboardInterrupt:
            pass
        finally:
            sweeper.stop()
            logger.info('Expiration sweeper stopped.')


if __name__ == '__main__':  # pragma: no cover
    main()
