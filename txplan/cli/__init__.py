"""Command line interface for txplan"""
