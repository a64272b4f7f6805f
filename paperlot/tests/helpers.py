"""
Builders shared by the lot kernel tests.
"""

from paperlot.core.events import XY, CarEntered, CarExited, CarMoved, SpotOccupied, SpotVacated

LOT = "001"


def ts(seconds: float) -> str:
    """Timestamp ``seconds`` after 2024-05-01T08:00:00Z, canonical form."""
    whole = int(seconds)
    ms = int(round((seconds - whole) * 1000))
    minutes, sec = divmod(whole, 60)
    hours, minutes = divmod(minutes, 60)
    return f"2024-05-01T{8 + hours:02d}:{minutes:02d}:{sec:02d}.{ms:03d}Z"


def entered(car, x, y, t, lot=LOT):
    return CarEntered(lot_id=lot, car_id=car, pos=XY(x, y), occurred_at=ts(t))


def moved(car, to, t, frm=(0, 0), lot=LOT):
    return CarMoved(lot_id=lot, car_id=car, from_pos=XY(*frm), to_pos=XY(*to), occurred_at=ts(t))


def exited(car, t, lot=LOT):
    return CarExited(lot_id=lot, car_id=car, occurred_at=ts(t))


def occupied(car, spot, t, lot=LOT):
    return SpotOccupied(lot_id=lot, car_id=car, spot_id=spot, occurred_at=ts(t))


def vacated(car, spot, t, lot=LOT):
    return SpotVacated(lot_id=lot, car_id=car, spot_id=spot, occurred_at=ts(t))
