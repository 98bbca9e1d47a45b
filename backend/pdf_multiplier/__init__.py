"""PDF Multiplier backend"""
