"""Common helpers shared by the command line and the rest of culprit"""
