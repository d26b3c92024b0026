"""HTTP-обработчики эндпоинтов метаданных и учётных данных."""
