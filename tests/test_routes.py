"""
HTTP route tests (no database, stores patched)
"""
import unittest
from unittest.mock import MagicMock, patch
from estate_agent import create_app
from estate_agent.services.agent_service import AgentService
from estate_agent.services.contact import OwnerContactSimulator
from estate_agent.services.data.property_store import PropertyValidationError
from estate_agent.services.llm.composer import ResponseComposer


async def _no_sleep(_delay):
    return None


class TestRoutes(unittest.TestCase):

    def setUp(self):
        self.app = create_app('testing')
        self.store = MagicMock()
        self.app.extensions['agent_service'] = AgentService(
            store=self.store,
            composer=ResponseComposer(),
            conversations=None,
            contact_simulator=OwnerContactSimulator(sleep=_no_sleep),
        )
        self.client = self.app.test_client()

    def test_query_requires_text(self):
        response = self.client.post('/api/agent/query', json={})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {'success': False, 'error': 'Query is required'})
        self.store.find.assert_not_called()

    def test_query(self):
        self.store.find.return_value = [
            {"id": 4, "title": "1BHK Flat for Rent in Baga", "type": "flat",
             "location": "Baga", "city": "North Goa", "price": 25000},
        ]
        response = self.client.post('/api/agent/query', json={'query': '1BHK for rent in Baga'})
        body = response.get_json()

        self.assertEqual(response.status_code, 200)
        self.assertTrue(body['success'])
        self.assertEqual(body['filtersApplied'],
                         {'isAvailable': True, 'type': 'flat', 'bedrooms': 1, 'location': 'baga', 'forSale': False})
        self.assertEqual(body['totalFound'], 1)
        self.assertIn('25,000', body['response'])

    def test_query_body_not_an_object(self):
        for body in (["3 bhk flat"], "3 bhk flat", 42):
            with self.subTest(body=body):
                response = self.client.post('/api/agent/query', json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.get_json(), {'success': False, 'error': 'Query is required'})
        self.store.find.assert_not_called()

    def test_query_echoed_as_received(self):
        self.store.find.return_value = []
        response = self.client.post('/api/agent/query', json={'query': '  villa in Calangute  '})
        body = response.get_json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(body['query'], '  villa in Calangute  ')
        self.assertEqual(body['filtersApplied'], {'isAvailable': True, 'type': 'house', 'location': 'calangute'})

    def test_query_store_failure_hides_detail(self):
        self.store.find.side_effect = RuntimeError('password authentication failed for user "postgres"')
        response = self.client.post('/api/agent/query', json={'query': 'flat in Panaji'})
        body = response.get_json()

        self.assertEqual(response.status_code, 500)
        self.assertFalse(body['success'])
        self.assertEqual(body['error'], 'Failed to process query')
        self.assertNotIn('password', response.get_data(as_text=True))

    def test_contact_owner_not_found(self):
        self.store.find_by_id.return_value = None
        response = self.client.post('/api/agent/contact-owner', json={'propertyId': 123})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()['error'], 'Property not found')

    def test_contact_owner(self):
        self.store.find_by_id.return_value = {"id": 3, "title": "Commercial Shop in Margao", "location": "Margao"}
        response = self.client.post('/api/agent/contact-owner', json={'propertyId': 3})
        body = response.get_json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(body['property']['id'], 3)
        self.assertIn('followUpRequired', body['contactResult'])

    def test_contact_owner_body_not_an_object(self):
        response = self.client.post('/api/agent/contact-owner', json=[3])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error'], 'propertyId is required')
        self.store.find_by_id.assert_not_called()

    def test_recommendations_body_not_an_object(self):
        self.store.find.return_value = []
        response = self.client.post('/api/agent/recommendations', json=['flat'])
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['filtersApplied'], {'isAvailable': True})

    def test_recommendations(self):
        self.store.find.return_value = []
        response = self.client.post('/api/agent/recommendations', json={'budget': 5000000})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['count'], 0)

    @patch('estate_agent.routes.property_routes.property_store')
    def test_list_properties(self, mock_store):
        mock_store.find.return_value = []
        response = self.client.get('/api/properties?type=flat&maxPrice=5000000&forSale=true')
        self.assertEqual(response.status_code, 200)
        filters = mock_store.find.call_args[0][0]
        self.assertEqual(filters, {'isAvailable': True, 'type': 'flat', 'price': {'lte': 5000000}, 'forSale': True})
        self.assertEqual(mock_store.find.call_args[1], {'limit': 20})

    @patch('estate_agent.routes.property_routes.property_store')
    def test_create_property_invalid(self, mock_store):
        mock_store.create.side_effect = PropertyValidationError("'price' must be a positive integer")
        response = self.client.post('/api/properties', json={'title': 'x'})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()['success'])

    @patch('estate_agent.services.data.property_store.execute_write')
    def test_create_property_scalar_area(self, mock_write):
        response = self.client.post('/api/properties', json={
            'title': 'Plot in Mapusa', 'type': 'plot', 'location': 'Mapusa',
            'city': 'North Goa', 'price': 3000000, 'area': 1200,
        })
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()['success'])
        self.assertIn('area', response.get_json()['error'])
        mock_write.assert_not_called()

    @patch('estate_agent.routes.property_routes.property_store')
    def test_get_property_not_found(self, mock_store):
        mock_store.find_by_id.return_value = None
        response = self.client.get('/api/properties/999')
        self.assertEqual(response.status_code, 404)

    @patch('estate_agent.routes.conversation_routes.conversation_store')
    def test_unknown_conversation(self, mock_store):
        mock_store.get.return_value = None
        response = self.client.get('/api/conversations/session_1')
        self.assertEqual(response.get_json(), {'messages': []})

    @patch('estate_agent.routes.conversation_routes.conversation_store')
    def test_clear_conversation(self, mock_store):
        response = self.client.delete('/api/conversations/session_1')
        self.assertEqual(response.status_code, 200)
        mock_store.delete.assert_called_once_with('session_1')

    @patch('estate_agent.routes.health_routes.is_database_connected', return_value=False)
    def test_health(self, _mock_db):
        response = self.client.get('/api/health')
        body = response.get_json()
        self.assertEqual(body['status'], 'OK')
        self.assertEqual(body['database'], 'Disconnected')


if __name__ == '__main__':
    unittest.main()
