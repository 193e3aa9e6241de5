"""Reminders Domain - the staged email/push reminder and thank-you batch"""
