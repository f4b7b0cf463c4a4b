"""Logic package contains the configuration layer shared by the commands"""
