'''
Segment Compass Test Suite

Test Modules:
-------------
- test_distance_calculator.py: Scale parsing, boundary distances, thresholds,
  availability rules
- test_search_area.py: Space cap and potential search areas
- test_special_zones.py: Apostles, near-apostles and terrorists geometry
- test_lateral_proximity.py: Lateral classification of single customers
- test_proximity_classifier.py: Full analysis (lateral, diagonal, special
  zones, summary, crossroads, unavailable scales)
- test_quadrant_assignment.py: Default quadrant resolver and distribution
- test_proximity_evaluator.py: Risks and opportunities for reports
- test_export.py: DataFrame and CSV export
- test_api.py: FastAPI endpoints

Running Tests:
--------------
    # Run all tests
    pytest segment_compass/tests/

    # Run a single module
    pytest segment_compass/tests/test_proximity_classifier.py -v
'''
