"""Camp domain - donation camp requests"""
