"""
Side-channel notifications emitted after successful payroll writes.

The engine keeps no cache; a caching layer (or anything else interested)
connects to these signals and invalidates its own keys:

    from hrms_payroll.signals import payroll_record_changed

    @payroll_record_changed.connect
    def _drop(sender, record_id, employee_id, period_key):
        cache.delete(f"pay_{record_id}")

Notifications go out after the write has committed, so a failing receiver
is logged and never reported as a failed write.
"""
import logging

from blinker import Namespace

log = logging.getLogger(__name__)

_signals = Namespace()

# kwargs: record_id, employee_id, period_key
payroll_record_changed = _signals.signal("payroll-record-changed")

# kwargs: period_key, period_type, processed, failed
payroll_batch_generated = _signals.signal("payroll-batch-generated")


def _send(signal, sender, **kw):
    for receiver in signal.receivers_for(sender):
        try:
            receiver(sender, **kw)
        except Exception:
            log.exception("[payroll.signals] receiver %r for %s failed", receiver, signal.name)


def notify_record_changed(sender, record):
    _send(
        payroll_record_changed, sender,
        record_id=record.id, employee_id=record.employee_id, period_key=record.period_key,
    )


def notify_batch_generated(sender, period_key, period_type, processed, failed):
    _send(
        payroll_batch_generated, sender,
        period_key=period_key, period_type=period_type, processed=processed, failed=failed,
    )
