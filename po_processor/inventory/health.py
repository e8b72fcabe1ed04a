"""
True inventory health.

Current stock is compared with predicted demand to give a base score of
0-100, then fixed dead stock and wastage modifiers are subtracted.
"""
from django.conf import settings

HEALTH_LABELS = [
    (75, 'Healthy'),
    (50, 'Moderate'),
    (25, 'At Risk'),
]
CRITICAL_LABEL = 'Critical'

MAX_SURPLUS_RATIO = 0.6
MODIFIER_WEIGHT = 25
DEAD_STOCK_ALERT_UNITS = 50
TREND_LABELS = ['Week 1', 'Week 2', 'Week 3', 'Week 4']


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


def dead_stock_units():
    return float(settings.PO_PROCESSOR['INVENTORY_DEAD_STOCK_UNITS'])


def wastage_percent():
    return float(settings.PO_PROCESSOR['INVENTORY_WASTAGE_PERCENT'])


def health_label(score):
    for threshold, label in HEALTH_LABELS:
        if score >= threshold:
            return label
    return CRITICAL_LABEL


def compute_health(predicted_demand, delta):
    """Return {'health_score', 'health_label', 'display'} for a material"""
    predicted_demand = float(predicted_demand)
    delta = float(delta)
    demand = predicted_demand if predicted_demand > 0 else 1.0

    if delta > 0:
        base_score = 50 + clamp(delta / demand, 0.0, MAX_SURPLUS_RATIO) * 50
    else:
        base_score = 50 - clamp(-delta / demand, 0.0, 1.0) * 50
    base_score = clamp(base_score, 0.0, 100.0)

    dead_penalty = clamp(dead_stock_units() / demand, 0.0, 1.0) * MODIFIER_WEIGHT
    waste_penalty = clamp(wastage_percent() / 10, 0.0, 1.0) * MODIFIER_WEIGHT
    score = clamp(base_score - dead_penalty - waste_penalty, 0.0, 100.0)

    label = health_label(score)
    return {
        'health_score': score,
        'health_label': label,
        'display': f"{round(score)}% {label}",
    }


def recommendations(current_stock, predicted_demand, delta):
    """Actions for a material given its stock position"""
    recs = []
    if delta < 0:
        recs.append({
            'title': 'Increase stock to meet demand',
            'description': (
                f"Current stock ({float(current_stock):.0f} units) is below predicted demand "
                f"({float(predicted_demand):.0f} units). Delta = {float(delta):.0f}. Place orders to "
                f"avoid stockouts and consider a 10-15% safety buffer."
            ),
            'priority': 'high',
            'category': 'stock_level',
            'icon': 'arrow_upward',
            'color': 'orange',
        })

    dead_units = dead_stock_units()
    if dead_units > DEAD_STOCK_ALERT_UNITS:
        recs.append({
            'title': 'Clear dead stock',
            'description': (
                f"{dead_units:.0f} units are classified as dead stock. Run a clearance or write-off "
                f"to free space and improve inventory health."
            ),
            'priority': 'medium',
            'category': 'dead_stock',
            'icon': 'delete_sweep',
            'color': 'red',
        })

    if not recs:
        recs.append({
            'title': 'Monitor and maintain',
            'description': 'Stock is aligned with demand. Keep monitoring trend data and reorder points.',
            'priority': 'low',
            'category': 'monitoring',
            'icon': 'check_circle_outline',
            'color': 'green',
        })
    return recs


def past_month_trend(predicted_demand):
    """Weekly consumption over the past month, ramping up to the predicted demand"""
    per_week = float(predicted_demand) / 4
    return [
        {'label': label, 'consumption': per_week * (0.9 + index * 0.05)}
        for index, label in enumerate(TREND_LABELS)
    ]


def analyze(material, current_stock=None):
    """
    Full health analysis of a material.

    ``current_stock`` overrides the stored stock for what-if analysis.
    """
    stock = float(material.current_stock if current_stock is None else current_stock)
    demand = float(material.predicted_demand)
    delta = stock - demand
    health = compute_health(demand, delta)
    return {
        'material_name': material.material_name,
        'material_code': material.material_code,
        'current_stock': stock,
        'predicted_demand': demand,
        'delta': delta,
        'status': 'Understock' if delta < 0 else 'Surplus',
        'is_override': current_stock is not None,
        'health': health,
        'modifiers': {
            'dead_stock_units': dead_stock_units(),
            'wastage_percent': wastage_percent(),
        },
        'recommendations': recommendations(stock, demand, delta),
        'trend': past_month_trend(demand),
    }
