"""BookMe - barbershop booking and management API"""
