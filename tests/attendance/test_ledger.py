from __future__ import annotations

import threading
from datetime import datetime

import pytest

from src.mice_attendance.mice_attendance.attendance.service import AttendanceLedger
from src.mice_attendance.mice_attendance.core.enums import ScanMode
from src.mice_attendance.mice_attendance.core.exceptions import PersistenceFailure, ValidationError

T1 = datetime(2026, 3, 2, 8, 5)
T2 = datetime(2026, 3, 2, 16, 55)
T3 = datetime(2026, 3, 2, 9, 30)


def test_entry_then_exit_then_reentry(attendance):
    ledger = AttendanceLedger(attendance)

    rec = ledger.record_entry(1, 7, T1)
    assert (rec.time_in, rec.time_out) == (T1, None)

    rec = ledger.record_exit(1, 7, T2)
    assert (rec.time_in, rec.time_out) == (T1, T2)
    assert rec.is_complete

    rec = ledger.record_entry(1, 7, T3)
    assert (rec.time_in, rec.time_out) == (T3, T2)
    assert rec.email_sent_in is False

    assert len(attendance.by_pair) == 1


def test_exit_before_entry_is_accepted(attendance):
    ledger = AttendanceLedger(attendance)

    rec = ledger.record_exit(1, 7, T2)
    assert rec.time_in is None
    assert rec.time_out == T2

    rec = ledger.record_entry(1, 7, T1)
    assert (rec.time_in, rec.time_out) == (T1, T2)


def test_exit_earlier_than_entry_is_not_rejected(attendance):
    ledger = AttendanceLedger(attendance)
    ledger.record_entry(1, 7, T2)

    rec = ledger.record_exit(1, 7, T1)

    assert (rec.time_in, rec.time_out) == (T2, T1)


def test_last_write_wins_per_half(attendance):
    ledger = AttendanceLedger(attendance)
    for at in (T1, T3, T2):
        ledger.record_entry(1, 7, at)
    ledger.record_exit(1, 7, T1)
    ledger.record_exit(1, 7, T2)

    rec = attendance.get_for_pair(student_id=1, event_id=7)
    assert (rec.time_in, rec.time_out) == (T2, T2)
    assert len(attendance.by_pair) == 1


def test_same_timestamp_twice_is_idempotent(attendance):
    ledger = AttendanceLedger(attendance)

    once = ledger.record_entry(1, 7, T1)
    twice = ledger.record_entry(1, 7, T1)

    assert once == twice


def test_reentry_clears_entry_flag_but_keeps_exit_flag(attendance):
    ledger = AttendanceLedger(attendance)
    rec = ledger.record_entry(1, 7, T1)
    attendance.mark_notified(attendance_id=rec.attendance_id, mode=ScanMode.IN, at=T1)
    ledger.record_exit(1, 7, T2)
    attendance.mark_notified(attendance_id=rec.attendance_id, mode=ScanMode.OUT, at=T2)

    rec = ledger.record_entry(1, 7, T3)

    assert rec.email_sent_in is False
    assert rec.email_sent_out is True


def test_pairs_are_independent(attendance):
    ledger = AttendanceLedger(attendance)
    ledger.record_entry(1, 7, T1)
    ledger.record_entry(2, 7, T3)
    ledger.record_exit(1, 8, T2)

    assert len(attendance.by_pair) == 3
    assert attendance.get_for_pair(student_id=1, event_id=7).time_out is None


def test_storage_failure_propagates_and_writes_nothing(attendance):
    attendance.fail_upsert = True
    ledger = AttendanceLedger(attendance)

    with pytest.raises(PersistenceFailure):
        ledger.record_entry(1, 7, T1)

    assert attendance.by_pair == {}


def test_timestamp_required(attendance):
    with pytest.raises(ValidationError):
        AttendanceLedger(attendance).record_entry(1, 7, None)


def test_concurrent_entries_never_duplicate_the_record(attendance):
    ledger = AttendanceLedger(attendance)
    barrier = threading.Barrier(8)
    results = []

    def scan(i):
        barrier.wait()
        results.append(ledger.record_entry(1, 7, datetime(2026, 3, 2, 8, i)))

    threads = [threading.Thread(target=scan, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(attendance.by_pair) == 1
    assert len({r.attendance_id for r in results}) == 1
    assert attendance.upserts == 8


def test_report_is_ordered_by_student_name(attendance):
    ledger = AttendanceLedger(attendance)
    ledger.record_entry(2, 7, T1)
    ledger.record_entry(1, 7, T3)

    names = [row.student_name for row in ledger.report(7)]

    assert names == ["Ana Reyes", "Ben Cruz"]


def test_same_instant_with_sub_second_noise_keeps_flag(attendance):
    ledger = AttendanceLedger(attendance)

    rec = ledger.record_entry(1, 7, T1.replace(microsecond=700000))
    assert rec.time_in == T1
    attendance.mark_notified(attendance_id=rec.attendance_id, mode=ScanMode.IN, at=T1)

    rec = ledger.record_entry(1, 7, T1.replace(microsecond=200000))
    assert rec.email_sent_in is True
