"""Helpers for running the external commands, which are wrapped into the oracles"""
