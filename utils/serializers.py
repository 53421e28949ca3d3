"""
Model -> JSON-ready dict conversion shared by the route handlers.
"""


def _iso(value):
    return value.isoformat() if value else None


def member_ref(member):
    if member is None:
        return None
    return {"id": member.id, "name": member.name, "email": member.email}


def member_to_dict(member):
    return {
        "id": member.id,
        "name": member.name,
        "email": member.email,
        "phone": member.phone,
        "role": member.role,
        "status": member.status,
        "join_date": _iso(member.join_date),
        "balance": round(member.balance or 0, 2),
        "attendance_rate": round(member.attendance_rate or 0, 2),
        "user_id": member.user_id,
    }


def user_to_dict(user):
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "must_change_password": user.must_change_password,
        "member_id": user.member.id if user.member else None,
    }


def expense_to_dict(expense):
    data = {
        "id": expense.id,
        "date": _iso(expense.date),
        "category": expense.category,
        "description": expense.description,
        "amount": expense.amount,
        "paid_by": member_ref(expense.payer),
        "present_members": expense.present_members,
        "selected_members": [member_ref(m) for m in expense.selected_members],
        "per_member_share": expense.per_member_share,
        "status": expense.status,
        "court_booking_cost": expense.court_booking_cost,
        "per_shuttle_cost": expense.per_shuttle_cost,
        "shuttles_used": expense.shuttles_used,
        "reduce_from_stock": expense.reduce_from_stock,
        "stock_consumed": expense.stock_consumed,
        "is_inventory": expense.is_inventory,
        "created_at": _iso(expense.created_at),
    }
    if expense.is_inventory:
        data.update({
            "item_name": expense.item_name,
            "quantity_purchased": expense.quantity_purchased,
            "quantity_used": expense.quantity_used,
        })
    return data


def share_to_dict(share, with_expense=False, with_member=False):
    data = {
        "id": share.id,
        "expense_id": share.expense_id,
        "member_id": share.member_id,
        "amount": share.amount,
        "paid_status": share.paid_status,
        "paid_at": _iso(share.paid_at),
    }
    if with_expense and share.expense is not None:
        data["expense"] = {
            "id": share.expense.id,
            "description": share.expense.description,
            "amount": share.expense.amount,
            "date": _iso(share.expense.date),
            "category": share.expense.category,
        }
    if with_member:
        data["member"] = member_ref(share.member)
    return data


def booking_to_dict(booking):
    return {
        "id": booking.id,
        "date": _iso(booking.date),
        "time": booking.time,
        "court": booking.court,
        "status": booking.status,
        "booked_by": member_ref(booking.booker),
        "players": booking.players,
    }


def attendance_to_dict(record):
    return {
        "id": record.id,
        "date": _iso(record.date),
        "member": member_ref(record.member),
        "member_id": record.member_id,
        "is_present": record.is_present,
    }


def joining_fee_to_dict(fee):
    return {
        "id": fee.id,
        "member": member_ref(fee.member),
        "received_by": member_ref(fee.receiver),
        "amount": fee.amount,
        "date": _iso(fee.date),
        "note": fee.note,
    }


def notification_to_dict(notification):
    return {
        "id": notification.id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "data": notification.data,
        "member": member_ref(notification.member),
        "read": notification.read,
        "created_at": _iso(notification.created_at),
    }
