"""Request domain - need-blood and can-donate posts"""
