"""Command-line interface for godecl"""
