"""API layer for JWT Security"""
