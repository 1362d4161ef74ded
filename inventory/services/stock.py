"""Stock quantity changes.

Every function here runs in one transaction and locks the StockBalance rows
it touches (select_for_update), so two concurrent transfers out of the same
warehouse cannot both pass the availability check.
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext as _

from core.models import AuditLog, NumberSeries
from core.services.audit import log_activity
from inventory.models import StockBalance, StockMovement

logger = logging.getLogger(__name__)

MIN_QUANTITY = Decimal("0.01")


class InsufficientStock(ValueError):
    def __init__(self, product, warehouse, available, requested):
        self.product = product
        self.warehouse = warehouse
        self.available = available
        self.requested = requested
        super().__init__(
            _("Insufficient stock. Available quantity: %(available)s") % {"available": available}
        )


def _locked_balance(product, warehouse):
    return (
        StockBalance.objects
        .select_for_update()
        .filter(product=product, warehouse=warehouse)
        .first()
    )


def _locked_or_new_balance(product, warehouse):
    balance, _created = StockBalance.objects.get_or_create(
        product=product,
        warehouse=warehouse,
        defaults={"quantity": Decimal("0.00"), "average_cost": product.purchase_price},
    )
    return StockBalance.objects.select_for_update().get(pk=balance.pk)


def _check_quantity(quantity):
    quantity = Decimal(quantity)
    if quantity < MIN_QUANTITY:
        raise ValidationError(_("Quantity must be at least 0.01."), code="min_quantity")
    return quantity


@transaction.atomic
def transfer_stock(*, product, from_warehouse, to_warehouse, quantity, transaction_date, remarks="", user,
                   request=None):
    """
    Move `quantity` of `product` between two warehouses.

    Writes two movements sharing one reference (TRF-NNNNN-OUT at the source,
    TRF-NNNNN-IN at the destination) and one audit record. Raises
    InsufficientStock before any write when the source cannot cover it.
    """
    if from_warehouse.pk == to_warehouse.pk:
        raise ValidationError(_("Source and destination warehouses must be different."), code="same_warehouse")
    quantity = _check_quantity(quantity)

    source = _locked_balance(product, from_warehouse)
    available = source.quantity if source else Decimal("0.00")
    if source is None or available < quantity:
        raise InsufficientStock(product, from_warehouse, available, quantity)

    source.quantity = source.quantity - quantity
    source.save(update_fields=["quantity", "updated_at"])

    destination = _locked_or_new_balance(product, to_warehouse)
    destination.quantity = destination.quantity + quantity
    destination.save(update_fields=["quantity", "updated_at"])

    reference = NumberSeries.next_for("TRF", prefix="TRF-", min_width=5)
    note = f" - {remarks}" if remarks else ""

    StockMovement.objects.create(
        reference_number=f"{reference}-OUT",
        type=StockMovement.Type.TRANSFER,
        transaction_date=transaction_date,
        warehouse=from_warehouse,
        product=product,
        quantity=quantity,
        unit_price=source.average_cost,
        remarks=f"Stock transfer out: {from_warehouse.name} to {to_warehouse.name}{note}",
        created_by=user,
    )
    StockMovement.objects.create(
        reference_number=f"{reference}-IN",
        type=StockMovement.Type.TRANSFER,
        transaction_date=transaction_date,
        warehouse=to_warehouse,
        product=product,
        quantity=quantity,
        unit_price=source.average_cost,
        remarks=f"Stock transfer in: {from_warehouse.name} to {to_warehouse.name}{note}",
        created_by=user,
    )

    log_activity(
        user=user,
        action=AuditLog.Action.TRANSFERRED_STOCK,
        model=StockMovement,
        properties={
            "product": product.name,
            "from_warehouse": from_warehouse.name,
            "to_warehouse": to_warehouse.name,
            "quantity": quantity,
            "reference_number": reference,
        },
        request=request,
    )
    logger.info("transfer %s: %s x %s %s -> %s", reference, quantity, product.code, from_warehouse.pk, to_warehouse.pk)
    return reference


@transaction.atomic
def adjust_stock(*, product, warehouse, quantity, direction, transaction_date, remarks="", user, request=None):
    """
    Manual correction. direction is "add" or "subtract"; subtracting more than
    is on hand raises InsufficientStock and writes nothing.
    """
    quantity = _check_quantity(quantity)

    if direction == "add":
        balance = _locked_or_new_balance(product, warehouse)
        balance.quantity = balance.quantity + quantity
        movement_type = StockMovement.Type.ADJUSTMENT_IN
        reference = NumberSeries.next_for("ADJ-IN", prefix="ADJ-IN-", min_width=5)
    elif direction == "subtract":
        balance = _locked_balance(product, warehouse)
        available = balance.quantity if balance else Decimal("0.00")
        if balance is None or available < quantity:
            raise InsufficientStock(product, warehouse, available, quantity)
        balance.quantity = balance.quantity - quantity
        movement_type = StockMovement.Type.ADJUSTMENT_OUT
        reference = NumberSeries.next_for("ADJ-OUT", prefix="ADJ-OUT-", min_width=5)
    else:
        raise ValidationError(_("Unknown adjustment direction."), code="direction")

    balance.save(update_fields=["quantity", "updated_at"])

    movement = StockMovement.objects.create(
        reference_number=reference,
        type=movement_type,
        transaction_date=transaction_date,
        warehouse=warehouse,
        product=product,
        quantity=quantity,
        unit_price=balance.average_cost,
        remarks=remarks,
        created_by=user,
    )

    log_activity(
        user=user,
        action=AuditLog.Action.ADJUSTED_STOCK,
        instance=movement,
        properties={
            "product": product.name,
            "warehouse": warehouse.name,
            "quantity": quantity,
            "direction": direction,
            "reference_number": reference,
        },
        request=request,
    )
    logger.info("adjustment %s: %s %s x %s @ %s", reference, direction, quantity, product.code, warehouse.pk)
    return movement
