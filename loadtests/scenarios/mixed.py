"""Mixed workload scenario.

Combines the shopper and administrator journeys with weights that model
storefront traffic: mostly browsing and buying, with a trickle of catalogue
maintenance. This is the recommended scenario for load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.catalogue import CatalogueBuilderJourney, CsvImportJourney
from loadtests.scenarios.shopping import (
    BrowseAndAbandonJourney,
    CancellationJourney,
    CardCheckoutJourney,
    CashOnDeliveryJourney,
)


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Shoppers (90%):
    - Browsing and abandoned carts: most common
    - Cash-on-delivery orders through delivery
    - Card checkouts from the cart
    - Cancellations: unhappy path

    Administrators (10%):
    - Catalogue building, repricing and restocking
    - CSV imports
    """

    wait_time = between(0.5, 2)
    tasks = {
        BrowseAndAbandonJourney: 40,
        CashOnDeliveryJourney: 20,
        CardCheckoutJourney: 25,
        CancellationJourney: 5,
        CatalogueBuilderJourney: 8,
        CsvImportJourney: 2,
    }
