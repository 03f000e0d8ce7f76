"""Application 'model' in the MVC sense: Logic with no awareness of Streamlit UI

This package defines the inference client, understanding heuristic and submission state machine
for the language model understanding tester, in a UI-agnostic way.
"""
