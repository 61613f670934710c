from booking_engine.domain.entities.service_catalog import ServiceCatalogEntry


SERVICE_CATALOG: dict[str, ServiceCatalogEntry] = {
    "haircut": ServiceCatalogEntry(
        service_id="haircut",
        display_name="Haircut",
        duration_minutes=30,
        category="hair",
    ),
    "beard_trim": ServiceCatalogEntry(
        service_id="beard_trim",
        display_name="Beard Trim",
        duration_minutes=15,
        category="hair",
    ),
    "hair_coloring": ServiceCatalogEntry(
        service_id="hair_coloring",
        display_name="Hair Coloring",
        duration_minutes=90,
        category="hair",
    ),
    "manicure": ServiceCatalogEntry(
        service_id="manicure",
        display_name="Manicure",
        duration_minutes=45,
        category="nails",
    ),
    "facial": ServiceCatalogEntry(
        service_id="facial",
        display_name="Classic Facial",
        duration_minutes=60,
        category="skin",
    ),
}
