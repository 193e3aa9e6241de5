"""Accounting Domain - expenses, barber payroll, manual payments, earnings and stats"""
