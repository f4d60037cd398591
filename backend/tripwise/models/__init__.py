from tripwise.models.trip import Trip, Traveler
from tripwise.models.flight import FlightLeg, FlightOption, flight_option_travelers
from tripwise.models.accommodation import AccommodationOption, accommodation_option_travelers
from tripwise.models.itinerary import ItineraryActivity, ItineraryCategory, ItineraryDay
from tripwise.models.adhoc_expense import AdhocExpense
from tripwise.models.packing import PackingCategory, PackingItem
from tripwise.models.expense import CostForecast, Expense, ExpenseActual, ExpenseSplit

__all__ = [
    "AccommodationOption",
    "AdhocExpense",
    "CostForecast",
    "Expense",
    "ExpenseActual",
    "ExpenseSplit",
    "FlightLeg",
    "FlightOption",
    "ItineraryActivity",
    "ItineraryCategory",
    "ItineraryDay",
    "PackingCategory",
    "PackingItem",
    "Traveler",
    "Trip",
    "accommodation_option_travelers",
    "flight_option_travelers",
]
