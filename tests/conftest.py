import sys
import os
import pytest
sys.path.append(os.path.dirname(__file__))

from diagram_helpers import char_width


@pytest.fixture
def measure():
    return char_width


@pytest.fixture
def order_source():
    return '''
drakon "order" {
  title = "Process order"
  parameters = ["order", "customer"]

  action "validate" { text = "Validate order" }
  question "in_stock" {
    text = "In stock?"
    no = {
      action "backorder" { text = "Place backorder" }
    }
  }
  action "ship" { text = "Ship" }
}
'''
