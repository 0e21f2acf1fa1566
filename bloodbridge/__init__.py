"""BloodBridge - blood donation coordination API"""

__version__ = "1.0.0"
