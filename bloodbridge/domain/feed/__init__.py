"""Feed domain - live feed filtering and snapshots"""
