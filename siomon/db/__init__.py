"""Lookup tables for CPU codenames and Machine Check errors."""