"""
Dashboard aggregation over a loaded snapshot
"""
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional


def dashboard_stats(snapshot: Dict[str, Any], today: Optional[str] = None) -> Dict[str, int]:
    """
    Headline counts; todayAppointments matches on the host's local calendar date
    unless today (YYYY-MM-DD) is given
    """
    if today is None:
        today = date.today().isoformat()

    appointments = snapshot['appointments']
    return {
        'totalPatients': len(snapshot['patients']),
        'totalAppointments': len(appointments),
        'todayAppointments': sum(1 for a in appointments if a.get('date') == today),
        'totalCheckups': len(snapshot['checkups']),
    }


def appointments_per_day(snapshot: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Appointment counts grouped by date, oldest date first
    """
    counts = Counter(a['date'] for a in snapshot['appointments'] if a.get('date'))
    return [{'date': day, 'count': counts[day]} for day in sorted(counts)]
