"""Schemas Pydantic de request y response"""
