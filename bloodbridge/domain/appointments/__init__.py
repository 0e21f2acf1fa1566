"""Appointment domain - donation slots and booking"""
