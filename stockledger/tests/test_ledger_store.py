"""
Tests for LedgerStore: record lifecycle, apply_delta and invariants.
"""

from decimal import Decimal

import pytest

from stockledger.exceptions import InvalidQuantity, InvariantViolation, NotFound
from stockledger.models import ItemStatus, Movement, MovementType, StockRecord
from stockledger.services import LedgerStore, scan_low_stock


pytestmark = pytest.mark.django_db


class TestGetOrCreate:
    """Tests for LedgerStore.get_or_create()."""

    def test_creates_zeroed_record_on_first_touch(self, rebar, wh001):
        record = LedgerStore.get_or_create(rebar, wh001)

        assert record.quantity_on_hand == Decimal('0')
        assert record.quantity_reserved == Decimal('0')
        assert record.quantity_available == Decimal('0')
        assert record.last_sequence == 0
        assert record.movements.count() == 0

    def test_returns_same_record_for_same_key(self, rebar, wh001):
        first = LedgerStore.get_or_create(rebar, wh001)
        second = LedgerStore.get_or_create('ITM002', 'WH001')

        assert first.pk == second.pk
        assert StockRecord.objects.count() == 1

    def test_resolves_by_pk(self, rebar, wh001):
        record = LedgerStore.get_or_create(rebar.pk, wh001.pk)

        assert record.item == rebar
        assert record.warehouse == wh001

    def test_unknown_item_raises_not_found(self, wh001):
        with pytest.raises(NotFound) as exc:
            LedgerStore.get_or_create('NOPE', wh001)

        assert exc.value.code == 'NOT_FOUND'
        assert exc.value.data['item'] == 'NOPE'

    def test_inactive_warehouse_raises_not_found(self, rebar, wh001):
        wh001.is_active = False
        wh001.save()

        with pytest.raises(NotFound):
            LedgerStore.get_or_create(rebar, wh001)

    def test_inactive_item_raises_not_found(self, rebar, wh001):
        rebar.status = ItemStatus.INACTIVE
        rebar.save()

        with pytest.raises(NotFound):
            LedgerStore.get_or_create(rebar, wh001)


class TestGetBalance:
    """Tests for LedgerStore.get_balance()."""

    def test_untouched_pair_raises_not_found(self, rebar, wh001):
        with pytest.raises(NotFound) as exc:
            LedgerStore.get_balance(rebar, wh001)

        assert exc.value.key == ('ITM002', 'WH001')

    def test_does_not_create(self, rebar, wh001):
        with pytest.raises(NotFound):
            LedgerStore.get_balance(rebar, wh001)

        assert StockRecord.objects.count() == 0

    def test_reads_inactive_item(self, stocked_rebar):
        item = stocked_rebar.item
        item.status = ItemStatus.INACTIVE
        item.save()

        record = LedgerStore.get_balance(item, 'WH001')
        assert record.quantity_on_hand == Decimal('1000')


class TestApplyDelta:
    """Tests for LedgerStore.apply_delta()."""

    def test_appends_exactly_one_movement(self, rebar, wh001):
        record = LedgerStore.apply_delta(
            rebar, wh001,
            on_hand_delta=Decimal('10'),
            movement_type=MovementType.RECEIPT,
            actor='receiving',
            reference='GRN-1',
        )

        assert record.quantity_on_hand == Decimal('10')
        assert record.last_sequence == 1
        movement = record.movements.get()
        assert movement.sequence == 1
        assert movement.movement_type == MovementType.RECEIPT
        assert movement.on_hand_delta == Decimal('10')
        assert movement.reserved_delta == Decimal('0')
        assert movement.on_hand_after == Decimal('10')
        assert movement.actor == 'receiving'
        assert movement.reference == 'GRN-1'

    def test_default_actor_from_settings(self, rebar, wh001):
        record = LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('1'))

        assert record.movements.get().actor == 'tests'

    def test_persists_balances(self, rebar, wh001):
        LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('10'))
        LedgerStore.apply_delta(rebar, wh001, reserved_delta=Decimal('4'))

        record = StockRecord.objects.get(item=rebar, warehouse=wh001)
        assert record.quantity_on_hand == Decimal('10')
        assert record.quantity_reserved == Decimal('4')
        assert record.quantity_available == Decimal('6')
        assert record.last_sequence == 2

    def test_quantizes_to_four_places(self, rebar, wh001):
        record = LedgerStore.apply_delta(rebar, wh001, on_hand_delta='1.23456')

        assert record.quantity_on_hand == Decimal('1.2346')

    def test_zero_deltas_rejected(self, rebar, wh001):
        with pytest.raises(InvalidQuantity):
            LedgerStore.apply_delta(rebar, wh001)

    def test_early_errors_carry_codes(self, rebar, wh001):
        with pytest.raises(InvalidQuantity) as exc:
            LedgerStore.apply_delta(rebar.pk, wh001)

        assert exc.value.key == ('ITM002', 'WH001')

    @pytest.mark.parametrize('movement_type, on_hand_delta', [
        (MovementType.ISSUE, Decimal('-5')),
        (MovementType.ADJUSTMENT, Decimal('5')),
        (MovementType.RECEIPT, Decimal('-5')),
    ])
    def test_unit_cost_only_on_receipts(self, stocked_rebar, movement_type, on_hand_delta):
        before = Movement.objects.count()

        with pytest.raises(InvalidQuantity):
            LedgerStore.apply_delta(
                stocked_rebar.item, 'WH001',
                on_hand_delta=on_hand_delta,
                movement_type=movement_type,
                unit_cost=Decimal('99999'),
            )

        stocked_rebar.refresh_from_db()
        assert stocked_rebar.average_cost == Decimal('25000')
        assert Movement.objects.count() == before

    def test_negative_on_hand_rejected(self, rebar, wh001):
        LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('5'))

        with pytest.raises(InvariantViolation) as exc:
            LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('-6'))

        assert exc.value.data['item'] == 'ITM002'
        assert exc.value.data['warehouse'] == 'WH001'
        assert exc.value.data['on_hand'] == Decimal('5')
        assert exc.value.data['on_hand_delta'] == Decimal('-6')

    def test_reserved_above_on_hand_rejected(self, rebar, wh001):
        LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('5'))

        with pytest.raises(InvariantViolation):
            LedgerStore.apply_delta(rebar, wh001, reserved_delta=Decimal('6'))

    def test_negative_reserved_rejected(self, rebar, wh001):
        LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('5'))

        with pytest.raises(InvariantViolation):
            LedgerStore.apply_delta(rebar, wh001, reserved_delta=Decimal('-1'))

    def test_on_hand_drop_below_reserved_rejected(self, stocked_rebar):
        # 1000 on hand, 100 reserved: dropping on_hand to 50 breaks reserved <= on_hand
        with pytest.raises(InvariantViolation):
            LedgerStore.apply_delta('ITM002', 'WH001', on_hand_delta=Decimal('-950'))

    def test_failure_writes_nothing(self, stocked_rebar):
        before = Movement.objects.count()

        with pytest.raises(InvariantViolation):
            LedgerStore.apply_delta('ITM002', 'WH001', on_hand_delta=Decimal('-5000'))

        stocked_rebar.refresh_from_db()
        assert Movement.objects.count() == before
        assert stocked_rebar.quantity_on_hand == Decimal('1000')
        assert stocked_rebar.last_sequence == before

    def test_failed_first_touch_leaves_no_record(self, rebar, wh001):
        with pytest.raises(InvariantViolation):
            LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('-1'))

        assert not StockRecord.objects.exists()

    def test_validate_hook_sees_locked_balances(self, stocked_rebar):
        seen = {}

        def validate(record):
            seen.update(record.balances())

        LedgerStore.apply_delta('ITM002', 'WH001', reserved_delta=Decimal('1'), validate=validate)

        assert seen == {
            'on_hand': Decimal('1000'),
            'reserved': Decimal('100'),
            'available': Decimal('900'),
        }

    def test_validate_hook_error_aborts(self, stocked_rebar):
        def validate(record):
            raise InvalidQuantity(item='ITM002')

        with pytest.raises(InvalidQuantity):
            LedgerStore.apply_delta('ITM002', 'WH001', reserved_delta=Decimal('1'), validate=validate)

        stocked_rebar.refresh_from_db()
        assert stocked_rebar.quantity_reserved == Decimal('100')

    def test_receipt_and_issue_timestamps(self, rebar, wh001):
        record = LedgerStore.apply_delta(
            rebar, wh001, on_hand_delta=Decimal('5'), movement_type=MovementType.RECEIPT,
        )
        assert record.last_receipt_at is not None
        assert record.last_issue_at is None

        record = LedgerStore.apply_delta(
            rebar, wh001, on_hand_delta=Decimal('-1'), movement_type=MovementType.ISSUE,
        )
        assert record.last_issue_at is not None
        assert record.last_movement_at == record.last_issue_at

    def test_distinct_keys_are_independent(self, rebar, helmet, wh001, wh002):
        LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('5'))
        LedgerStore.apply_delta(rebar, wh002, on_hand_delta=Decimal('7'))
        LedgerStore.apply_delta(helmet, wh001, on_hand_delta=Decimal('9'))

        assert LedgerStore.get_balance(rebar, wh001).quantity_on_hand == Decimal('5')
        assert LedgerStore.get_balance(rebar, wh002).quantity_on_hand == Decimal('7')
        assert LedgerStore.get_balance(helmet, wh001).quantity_on_hand == Decimal('9')
        # sequence numbers are per key
        assert LedgerStore.get_balance(rebar, wh002).last_sequence == 1


class TestDerivedValues:
    """Tests for StockRecord derived properties."""

    def test_total_value_prefers_average_cost(self, stocked_rebar):
        assert stocked_rebar.total_value == Decimal('25000000')

    def test_total_value_falls_back_to_unit_cost(self, rebar, wh001):
        record = StockRecord(item=rebar, warehouse=wh001,
                             quantity_on_hand=Decimal('2'), unit_cost=Decimal('3.5'))
        assert record.total_value == Decimal('7')

    def test_total_value_without_cost_is_zero(self, rebar, wh001):
        record = StockRecord(item=rebar, warehouse=wh001, quantity_on_hand=Decimal('2'))
        assert record.total_value == Decimal('0')

    def test_low_stock_annotation(self, stocked_rebar):
        row = StockRecord.objects.with_availability().get(pk=stocked_rebar.pk)

        assert row.available == Decimal('900')
        assert row.shortfall == Decimal('700')
        assert not StockRecord.objects.low_stock().exists()


class TestSetLevels:
    """Tests for LedgerStore.set_levels()."""

    def test_sets_levels_without_movement(self, rebar, wh001):
        record = LedgerStore.set_levels(
            rebar, wh001,
            min_level=Decimal('50'), max_level=Decimal('2000'), reorder_point=Decimal('200'),
        )

        assert record.min_level == Decimal('50')
        assert record.max_level == Decimal('2000')
        assert record.reorder_point == Decimal('200')
        assert record.movements.count() == 0

    def test_partial_update_keeps_other_levels(self, stocked_rebar):
        record = LedgerStore.set_levels('ITM002', 'WH001', max_level=Decimal('5000'))

        assert record.reorder_point == Decimal('200')
        assert record.max_level == Decimal('5000')

    def test_negative_level_rejected(self, rebar, wh001):
        with pytest.raises(InvalidQuantity):
            LedgerStore.set_levels(rebar, wh001, reorder_point=Decimal('-1'))

    def test_min_above_max_rejected(self, rebar, wh001):
        with pytest.raises(InvalidQuantity):
            LedgerStore.set_levels(rebar, wh001, min_level=Decimal('10'), max_level=Decimal('5'))


class TestDeactivate:
    """Tests for LedgerStore.deactivate()."""

    def test_empty_record_is_deactivated_not_deleted(self, rebar, wh001):
        LedgerStore.get_or_create(rebar, wh001)

        record = LedgerStore.deactivate(rebar, wh001)

        assert record.is_active is False
        assert StockRecord.objects.filter(pk=record.pk).exists()

    def test_record_with_stock_cannot_be_deactivated(self, stocked_rebar):
        with pytest.raises(InvariantViolation):
            LedgerStore.deactivate('ITM002', 'WH001')

    def test_next_touch_reactivates(self, rebar, wh001):
        LedgerStore.get_or_create(rebar, wh001)
        LedgerStore.deactivate(rebar, wh001)

        record = LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('1'))

        record.refresh_from_db()
        assert record.is_active is True

    def test_deactivated_between_read_and_lock(self, rebar, wh001, monkeypatch):
        LedgerStore.set_levels(rebar, wh001, reorder_point=Decimal('50'))
        original = LedgerStore.get_or_create

        def deactivating_get_or_create(cls, item, warehouse):
            record = original(item, warehouse)
            # a concurrent deactivate() commits before the row lock is taken
            StockRecord.objects.filter(pk=record.pk).update(is_active=False)
            return record

        monkeypatch.setattr(LedgerStore, 'get_or_create', classmethod(deactivating_get_or_create))

        record = LedgerStore.apply_delta(rebar, wh001, on_hand_delta=Decimal('10'))

        record.refresh_from_db()
        assert record.is_active is True
        assert record.quantity_on_hand == Decimal('10')
        assert [a.item for a in scan_low_stock()] == ['ITM002']

    def test_item_with_records_cannot_be_deleted(self, stocked_rebar):
        from django.db.models import ProtectedError

        with pytest.raises(ProtectedError):
            stocked_rebar.item.delete()
