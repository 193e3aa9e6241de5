"""
Appointments Domain

Booking, status transitions (with the 24h cancellation rule), payment
marking and calendar export. Completing an appointment issues its
CLIENT_SERVICE invoice in the same transaction.
"""
