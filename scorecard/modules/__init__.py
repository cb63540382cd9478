# Scorecard pipeline modules
