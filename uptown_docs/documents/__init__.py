"""Document composition pipeline: Client Offer and Reservation Form PDFs."""
