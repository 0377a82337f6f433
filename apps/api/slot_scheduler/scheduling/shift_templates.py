# Starter templates offered to a business that has none yet.
DEFAULT_SHIFT_TEMPLATES = [
    # Mon-Fri
    {"days": [1, 2, 3, 4, 5], "name": "Morning", "start_hhmm": "09:00", "end_hhmm": "13:00",
     "breaks": [{"start_time": "11:00", "end_time": "11:15", "type": "coffee"}], "color": "#4f46e5"},
    {"days": [1, 2, 3, 4, 5], "name": "Full day", "start_hhmm": "09:00", "end_hhmm": "17:00",
     "breaks": [{"start_time": "12:00", "end_time": "13:00", "type": "lunch"}], "color": "#000000"},
    {"days": [1, 2, 3, 4, 5], "name": "Evening", "start_hhmm": "13:00", "end_hhmm": "21:00",
     "breaks": [{"start_time": "17:00", "end_time": "17:30", "type": "rest"}], "color": "#0891b2"},

    # Weekend
    {"days": [0, 6], "name": "Weekend", "start_hhmm": "10:00", "end_hhmm": "16:00",
     "breaks": [{"start_time": "12:30", "end_time": "13:00", "type": "lunch"}], "color": "#16a34a"},
]
