"""
Services Package
Version: 1.0.0

IMPORTANT: Keep this file minimal to avoid circular imports.
Import services directly where needed:
  from services.booking_store import BookingStore
  from services.booking_service import BookingService
"""
