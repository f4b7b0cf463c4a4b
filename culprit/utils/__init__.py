"""Utils contains various helper modules and functions, that can be used in arbitrary projects"""
