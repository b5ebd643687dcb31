"""Capa de acceso a datos"""
