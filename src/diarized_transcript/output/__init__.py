"""Transcript output formats"""
